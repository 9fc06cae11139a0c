"""htmlbind: commands subpackage
---------------------------------------------------------
Inspection commands exposed by the ``htmlbind`` tool, organized with Typer.

Public API
----------
``widgets`` : ``htmlbind list`` and ``htmlbind show``
``deps`` : ``htmlbind deps`` (resolve dependency manifests)
``config`` : ``htmlbind config show``
"""
