"""Learnory core: exam marking, study planning and gamification."""
