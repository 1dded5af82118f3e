from lambdaplay.cli import cli

cli()
