"""
apfrq - archive browser for AP exam free-response documents.

Build the JSON indexes with ``apfrq build`` and browse them with
``apfrq interactive``.
"""
