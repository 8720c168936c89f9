"""ImageForm - FastAPI HTTP layer.

Modules
-------
main
    Application factory, routes, and the ``main()`` CLI entry point.
rendering
    Template rendering and HTTP status selection for page states.
"""
