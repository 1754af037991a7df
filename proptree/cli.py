# proptree/cli.py

import fnmatch
import re
import click

from .document import dumps, flatten, get_by_dot, to_serializable
from .exceptions import PropertiesError
from .processor import PropertiesProcessor
from .provenance import ProvenanceStore

def _match(pattern: str, text: str, ignore_case: bool = False) -> bool:
    """
    Try glob first, then regex, then exact match.
      - Glob if pattern contains *, ?, [ or ]
      - Regex if pattern contains any of . + ^ $ ( ) { } | \
      - Exact otherwise
    """
    if ignore_case:
        pattern = pattern.lower()
        text = text.lower()

    if any(c in pattern for c in "*?[]"):
        return fnmatch.fnmatch(text, pattern)

    if any(c in pattern for c in ".+^$(){}|\\"):
        flags = re.IGNORECASE if ignore_case else 0
        return re.search(pattern, text, flags) is not None

    return pattern == text

def _as_text(value) -> str:
    """Text a --val pattern is matched against: strings as-is, other values as JSON."""
    return value if isinstance(value, str) else dumps(value, indent=None)

@click.group(context_settings={"help_option_names": ["-h", "--help"],
                               "auto_envvar_prefix": "PROPTREE"})
@click.option("-c", "--config", "source", type=click.File("rb"), default="-",
              help="Properties file to read ('-' for stdin)")
@click.option("--hierarchical/--flat", default=True, show_default=True,
              help="Nest dotted keys or keep them flat")
@click.option("--raw-data", is_flag=True, help="Keep values as strings")
@click.option("--encoding", help="Text encoding of the input")
@click.pass_context
def cli(ctx, source, hierarchical, raw_data, encoding):
    """
    proptree CLI: read a .properties file and inspect it as a nested document.

    Load a file (`-c app.properties`), then run subcommands:
      • dump
      • get         KEY
      • exists      KEY
      • search      [--key PAT] [--val PAT] [-i]
      • convert     [--to json|toml] [--out FILE]
      • provenance  [KEY]
    """
    configuration = {
        "hierarchical": hierarchical,
        "raw-data": raw_data,
        "encoding": encoding,
    }
    provenance = ProvenanceStore()
    try:
        doc = PropertiesProcessor().process(configuration, source, provenance)
    except (PropertiesError, UnicodeDecodeError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        ctx.exit(1)

    ctx.obj = {
        "doc": doc,
        "provenance": provenance,
    }

@cli.command()
@click.argument("key")
@click.pass_context
def get(ctx, key):
    """Print the value of KEY (dot-notation) as JSON."""
    try:
        val = get_by_dot(ctx.obj["doc"], key)
    except (KeyError, TypeError):
        click.secho(f"Key not found: {key}", fg="yellow", err=True)
        ctx.exit(1)
    click.echo(dumps(val))

@cli.command()
@click.argument("key")
@click.pass_context
def exists(ctx, key):
    """Exit 0 if KEY exists in the document, 1 otherwise."""
    try:
        get_by_dot(ctx.obj["doc"], key)
    except (KeyError, TypeError):
        click.echo("false")
        ctx.exit(1)
    click.echo("true")

@cli.command()
@click.option("--key", "key_pat",    help="Pattern for keys (regex/glob/plain)")
@click.option("--val", "val_pat",    help="Pattern for values (regex/glob/plain)")
@click.option("-i", "--ignore-case", is_flag=True,
              help="Make key/value matching case-insensitive")
@click.pass_context
def search(ctx, key_pat, val_pat, ignore_case):
    """
    Search for keys/values matching patterns.
    At least one of --key or --val must be provided.
    """
    if not (key_pat or val_pat):
        click.secho("Error: supply --key or --val", fg="red", err=True)
        ctx.exit(1)

    found = {}
    for k, v in flatten(ctx.obj["doc"]).items():
        ks = _match(key_pat, k, ignore_case) if key_pat else True
        vs = _match(val_pat, _as_text(v), ignore_case) if val_pat else True
        if ks and vs:
            found[k] = v

    if not found:
        click.echo("No matches")
        ctx.exit(1)

    click.echo(dumps(found))

@cli.command()
@click.pass_context
def dump(ctx):
    """Pretty-print the entire document as JSON."""
    click.echo(dumps(ctx.obj["doc"]))

@cli.command()
@click.option("--to", "fmt", type=click.Choice(["json", "toml"]), default="json",
              help="Format to convert to")
@click.option("--out", "out_file", help="Write to file (instead of stdout)")
@click.pass_context
def convert(ctx, fmt, out_file):
    """
    Convert the document to JSON or TOML.
    """
    doc = ctx.obj["doc"]
    if fmt == "toml":
        import toml as _toml
        text = _toml.dumps(to_serializable(doc))
    else:
        text = dumps(doc)

    if out_file:
        with open(out_file, "w") as f:
            f.write(text)
        click.secho(f"Wrote {fmt.upper()} to {out_file}", fg="green")
    else:
        click.echo(text)

@cli.command()
@click.argument("key", required=False)
@click.option("--line", "line_number", type=int, help="Only keys set by this input line")
@click.pass_context
def provenance(ctx, key, line_number):
    """
    Show which line set each key, or the override history of KEY.
    """
    store = ctx.obj["provenance"]
    if key is not None:
        entries = store.get_history(key)
    elif line_number is not None:
        entries = store.from_line(line_number)
    else:
        entries = sorted(store.all_entries().values(), key=lambda e: e.line_number or 0)

    if not entries and (key is not None or line_number is not None):
        what = key if key is not None else f"line {line_number}"
        click.secho(f"No provenance for {what}", fg="yellow", err=True)
        ctx.exit(1)

    for entry in entries:
        click.echo(f"{entry.key} = {dumps(entry.value, indent=None)}  <- {entry.source}")
