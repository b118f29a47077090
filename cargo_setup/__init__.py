"""cargo-setup: scaffold Rust crates with profile-based extras."""

__version__ = "0.1.0"
