"""Raindrop.io auto-tagger: AI tag suggestions for untagged bookmarks."""
