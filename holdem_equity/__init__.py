"""Hold'em equity advisor: hand ranking, Monte-Carlo equity and betting advice."""

__version__ = "0.1.0"
