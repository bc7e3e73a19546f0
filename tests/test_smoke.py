"""Minimal smoke tests for the change-graph package."""


def test_package_importable() -> None:
    """Ensure the top-level package exposes the expected namespace."""
    import change_graph  # noqa: F401  # Imported for side effects


def test_console_entry_point_resolves() -> None:
    from change_graph.cli import app

    assert callable(app.run)
    assert app.build_parser().prog == "iac-change-graph"
