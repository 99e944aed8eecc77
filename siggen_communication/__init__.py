# siggen_communication/__init__.py
