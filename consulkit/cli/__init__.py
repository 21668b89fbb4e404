"""Command line interface (``consulkit`` entry point; requires the ``cli`` extra)."""
