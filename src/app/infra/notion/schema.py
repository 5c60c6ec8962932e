# src/app/infra/notion/schema.py
"""Property names of the Recipes and Websites databases."""

# Recipes database
RECIPE_TITLE = "Name Keyword"
RECIPE_LINK = "Model Image URL"
RECIPE_WEBSITE = "Website"
RECIPE_DESCRIPTION = "Description"

# Websites database
WEBSITE_TITLE = "Name"
WEBSITE_ACTIVE = "Active"
WEBSITE_TOTAL_RECORDS = "Total Recipes"
WEBSITE_TOTAL_RUNS = "Total Runs"
WEBSITE_LAST_RUN_COUNT = "Last Recipes Count"
WEBSITE_AVERAGE_PER_RUN = "Average Per Run"
WEBSITE_LAST_RUN_AT = "Last Run"
