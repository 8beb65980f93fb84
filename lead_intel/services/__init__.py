# Services
#
# Organized by domain:
#   - providers/     Search, page content and LLM clients (Jina, OpenAI, direct HTTP)
#   - quality/       Field quality rules, upgrade decisions, deduplication
#   - scraping/      Source selection and scraping for a person
#   - intelligence/  LLM validation and intelligence extraction
#   - db/            Run state persistence
#
# enrichment.py, contact_upgrade.py and discovery.py sit at the root as orchestrators;
# pipeline.py wires them together.
