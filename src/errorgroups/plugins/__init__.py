"""Built-in credential provider plugins.

Each sub-package implements one :class:`~errorgroups.auth.base.AuthPlugin`
and is registered by :func:`~errorgroups.auth.manager.create_default_manager`.
"""
