from instantcode.cli import run_cli

run_cli()
