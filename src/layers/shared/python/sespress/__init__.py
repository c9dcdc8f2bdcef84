"""SesPress - transactional email through Amazon SES."""

__version__ = "0.1.0"
