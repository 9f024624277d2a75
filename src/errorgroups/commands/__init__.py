"""Built-in CLI sub-commands (``init``, ``groups``, ``config``)."""
