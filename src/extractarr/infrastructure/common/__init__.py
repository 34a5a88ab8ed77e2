"""Common regex, codec and text helpers shared by extractors and adapters."""
