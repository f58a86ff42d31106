"""Squad report importer and player store."""
