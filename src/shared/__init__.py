"""Cross-cutting constants shared by service packages."""
