"""Loading of the scraper's monthly listings into a unified record table."""
