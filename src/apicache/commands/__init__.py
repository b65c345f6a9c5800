"""Built-in CLI sub-command groups (``uploads``, ``config``)."""
