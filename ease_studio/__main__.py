from ease_studio.cli import app

app()
