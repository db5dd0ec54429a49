"""CLI subcommands for distsift."""
