"""Cyclopts application and command routing for the finval CLI.

The CLI provides the following commands:
- validate: Validate a JSON or CSV file of entity records
- check-date: Check a single date string
- list-entities: List entity types accepted by validate
- check-config: Validate a settings file
"""

from cyclopts import App

from finval import __version__
from finval.cli import commands

app = App(
    name="finval",
    help="Validation and error reporting for personal-finance records",
    version=__version__,
)

app.command(commands.validate)
app.command(commands.check_date, name="check-date")
app.command(commands.list_entities, name="list-entities")
app.command(commands.check_config, name="check-config")
