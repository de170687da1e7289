"""Daily outreach queue: template rendering and generation."""
