"""Command-line interface for the Mailchimp CLI."""
