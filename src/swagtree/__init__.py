"""swagtree -- Normalize OpenAPI 3.0/3.1 documents into grouped type trees.

This package walks an OpenAPI document and turns every operation into an
*interface record*: its parameters, request body and response collapsed into
canonical field trees with ``$ref`` pointers resolved, ``allOf`` compositions
merged and reference cycles cut.  Records are grouped by tag, ready for a
renderer that emits type declarations.

Typical workflow::

    swagtree config add-source https://petstore3.swagger.io/api/v3/openapi.json
    swagtree inspect tree
    swagtree inspect show getPetById

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and source management.
    parser: The normalization engine and document loader.
    naming: File names, path names and record keys.
    search: Flat search over normalized records.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
