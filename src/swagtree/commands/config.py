"""Config commands -- view and modify the global configuration.

Provides the ``swagtree config`` sub-command group for reading and updating
the user's :class:`~swagtree.models.GlobalConfig`: the list of document
sources, the default group title and the output format.
"""

from __future__ import annotations

from typing import Optional

import typer

from swagtree.exceptions import SwagtreeError
from swagtree.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    resolved: bool = typer.Option(
        False, "--resolved", help="Show the effective config after env and project overrides."
    ),
) -> None:
    """Show the current configuration.

    Example::

        swagtree config show
        swagtree --json config show --resolved
    """
    from swagtree.config import get_config_dir, load_global_config, resolve_config

    try:
        config = resolve_config() if resolved else load_global_config()
    except SwagtreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'output.format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a scalar configuration value.

    The updated config is validated against
    :class:`~swagtree.models.GlobalConfig` before saving.  Sources are managed
    with ``add-source`` and ``remove-source``.

    Example::

        swagtree config set default_group misc
        swagtree config set output.format json
    """
    from swagtree.config import load_global_config, save_global_config
    from swagtree.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    *parents, final_key = key.split(".")
    target = data
    for part in parents:
        if not isinstance(target.get(part), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[part]

    if final_key not in target or isinstance(target[final_key], (dict, list)):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    target[final_key] = value

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {value}")


@config_app.command("add-source")
def config_add_source(
    url: str = typer.Argument(help="URL or file path of the OpenAPI document."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Display name."),
    link: Optional[str] = typer.Option(None, "--link", help="Documentation link."),
    base_path: str = typer.Option(
        "", "--base-path", help="Prefix stripped from paths when naming files."
    ),
) -> None:
    """Add a document source, replacing any source with the same URL.

    Example::

        swagtree config add-source https://petstore3.swagger.io/api/v3/openapi.json \\
            --title Petstore --base-path /api/v3
    """
    from swagtree.config import add_source, load_global_config, save_global_config
    from swagtree.models import SourceConfig

    source = SourceConfig(url=url, title=title, link=link, base_path=base_path)
    save_global_config(add_source(load_global_config(), source))
    success(f"Added source {source.label}")


@config_app.command("remove-source")
def config_remove_source(
    name: str = typer.Argument(help="Title or URL of the source to remove."),
) -> None:
    """Remove a configured document source.

    Example::

        swagtree config remove-source Petstore
    """
    from swagtree.config import load_global_config, remove_source, save_global_config

    try:
        config = remove_source(load_global_config(), name)
    except SwagtreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    save_global_config(config)
    success(f"Removed source {name}")
