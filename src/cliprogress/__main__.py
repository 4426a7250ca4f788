from cliprogress.cli.main import app

app()
