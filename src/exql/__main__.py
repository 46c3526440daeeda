from exql.cli import app

app()
