"""Built-in CLI sub-commands for swagtree.

* :mod:`~swagtree.commands.inspect` -- browse, list, search and show the
  normalized interface records of the configured sources.
* :mod:`~swagtree.commands.config` -- view and modify global settings and
  document sources.

Each module exports a :class:`typer.Typer` sub-application registered on the
root app by :func:`~swagtree.app.register_commands`.
"""
