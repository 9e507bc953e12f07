"""CLI module for whisperbox."""
