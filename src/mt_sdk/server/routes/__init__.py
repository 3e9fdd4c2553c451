"""Agent server routes."""
