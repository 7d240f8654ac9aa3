from taskview.cli import app

app()
