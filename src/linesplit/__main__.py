from linesplit.cli import app

app()
