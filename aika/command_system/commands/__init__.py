"""Built-in REPL slash commands."""
