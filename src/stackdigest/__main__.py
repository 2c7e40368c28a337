from stackdigest.cli import cli

cli()
