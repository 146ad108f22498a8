"""Record serialisation and terminal rendering."""
