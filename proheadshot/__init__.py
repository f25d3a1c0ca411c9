"""ProHeadshot API: daily-quota gated professional headshot generation."""
