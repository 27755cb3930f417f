"""
Batch Harvest Script

Harvests every "Modern Love" column from the Article Search API, splits
the podcast episodes (published under the sentinel byline) from the essays,
and exports both to CSV.

Filter: kicker:("Modern Love")
Output: data/output/modern_love_primary.csv    (essays)
        data/output/modern_love_secondary.csv  (sentinel author)
        data/raw/page_NN.json                  (raw pages, HTTP 200 only)

Note: The provider allows 1000 calls/day; the full run needs ~62 calls.
"""

import logging
from datetime import datetime

from nyt_harvest.api import HarvestPipeline
from nyt_harvest.config import get_app_config
from nyt_harvest.models import SearchQuery
from nyt_harvest.services import count_by_year

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

FILTER_QUERY = 'kicker:("Modern Love")'
OUTPUT_PREFIX = "modern_love"

print("=" * 80)
print("BATCH HARVEST: Modern Love columns")
print("=" * 80)

# === Step 1: Load Configuration ===
print("\n[Step 1] Loading configuration...")
config = get_app_config()
api_key = config.resolve_api_key()
print(f"  ✓ Config loaded")
print(f"    - Endpoint: {config.search_url}")
print(f"    - Delay between calls: {config.request_delay_sec}s")
print(f"    - API Key: {'***' + api_key[-4:]}")

# === Step 2: Build Query ===
print("\n[Step 2] Building query...")
query = SearchQuery(api_key=api_key, fq=FILTER_QUERY)
print(f"  ✓ fq={query.fq}")

# === Step 3: Initialize Pipeline ===
print("\n[Step 3] Initializing HarvestPipeline...")
pipeline = HarvestPipeline.from_config(config)
print(f"  ✓ HarvestPipeline ready")

# === Step 4: Execute Harvest ===
print("\n[Step 4] Starting harvest...")
print(f"  Sentinel author: {config.sentinel_author}")
print("  Pages that return a non-200 status are skipped and listed at the end.")
print()

start_time = datetime.now()

stats = pipeline.run(
    query,
    sentinel_author=config.sentinel_author,
    output_prefix=OUTPUT_PREFIX
)

elapsed = (datetime.now() - start_time).total_seconds()

# === Step 5: Display Results ===
print("\n" + "=" * 80)
print("HARVEST COMPLETE")
print("=" * 80)
print()
print(f"⏱️  Total Time: {elapsed:.1f} seconds ({elapsed/60:.1f} minutes)")
print()
print("📊 Statistics:")
print(f"    ✓ Pages estimated: {stats['pages_estimated']}")
print(f"    ✓ Pages fetched: {stats['pages']}")
print(f"    ✓ Skipped documents: {stats['skipped']}")
print(f"    ✓ Records: {stats['records']} "
      f"({stats['primary']} primary, {stats['secondary']} secondary)")
print(f"    ✗ Failed pages: {pipeline.last_report.failed_page_list() or 'none'}")
print()
print("📅 Articles per year:")
print(count_by_year(pipeline.last_report.records).to_string())
print()
print(f"💾 Output: {config.output_dir}/{OUTPUT_PREFIX}_*.csv")
print()
print("=" * 80)
