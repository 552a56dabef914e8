from dnschanger.cli.main import app

app()
