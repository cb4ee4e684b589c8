"""Trading logbook: multi-user trade journal with risk-level gamification."""
