from bucketfinder.cli import app

app(prog_name="bucketfinder")
