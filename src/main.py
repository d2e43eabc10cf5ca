import json
import logging

import click
from schema import SchemaError

from tracker import runner
from tracker.binder_tracker import DEFAULT_TRANSACTION_FILE, resolve as resolve_binders
from tracker.capture import capture_device, capture_local
from tracker.errors import SourceUnavailable

@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log debug output.')
def cli(verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format='%(levelname)s:%(message)s')

@cli.command()
@click.argument('pid', type=click.IntRange(min=0))
@click.option('--source', type=click.Path(dir_okay=False), default=None,
              help='Transaction snapshot, defaults to the kernel binder transaction file.')
@click.option('--max-iterations', type=click.IntRange(min=1), default=None)
@click.option('--deadline', type=click.FloatRange(min=0, min_open=True), default=None, help='Seconds.')
@click.option('--json', 'as_json', is_flag=True, help='Print the PIDs as a JSON list.')
def resolve(pid, source, max_iterations, deadline, as_json):
    binders = resolve_binders(source, pid, max_iterations=max_iterations, deadline=deadline)
    if as_json:
        click.echo(json.dumps(binders))
    else:
        for binder in binders:
            click.echo(binder)

@cli.command()
@click.argument('output', type=click.Path(dir_okay=False))
@click.option('--device/--local', default=False, help='Capture over adb instead of from the local kernel.')
@click.option('--serial', default=None, help='adb device serial.')
@click.option('--source', default=None, help='Transaction file to read.')
def capture(output, device, serial, source):
    try:
        if device:
            capture_device(output, serial, source or DEFAULT_TRANSACTION_FILE)
        else:
            capture_local(output, source)
    except SourceUnavailable as e:
        raise click.ClickException(str(e))

@cli.command()
@click.argument('config')
def analyze(config):
    try:
        runner.run(config)
    except SchemaError as se:
        raise click.ClickException(f"Invalid configuration: {se}")

if __name__ == "__main__":
    cli()
