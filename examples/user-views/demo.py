#!/usr/bin/env python3
"""
schemaview demo

Projects one User onto each of its views and prints what every view keeps.

Usage:
    python examples/user-views/demo.py
"""

from rich.console import Console
from rich.table import Table

from schema import User

from schemaview import project

console = Console()


def main() -> None:
    """Main entry point."""
    user = User(
        id=7,
        username="ada",
        email="ada@example.com",
        password_hash="$argon2id$...",
        audit_log=["created", "verified"],
    )

    for view_name, view_class in User.__views__.items():
        table = Table(title=view_name)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for name, value in project(user, view_class).model_dump().items():
            table.add_row(name, repr(value))
        console.print(table)


if __name__ == "__main__":
    main()
