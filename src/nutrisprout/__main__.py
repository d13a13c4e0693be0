from nutrisprout.cli import app

app(prog_name="nutrisprout")
