from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

EXTERNAL_API_COUNT = Counter(
    "external_api_requests_total",
    "Total number of external price API requests",
    ["source", "status"],
)

EXTERNAL_API_DURATION = Histogram(
    "external_api_duration_seconds",
    "Duration of external price API requests in seconds",
    ["source"],
)

CACHE_HITS = Counter("price_cache_hits_total", "Total number of price cache hits")
CACHE_MISSES = Counter("price_cache_misses_total", "Total number of price cache misses")

PRICE_RESOLUTIONS = Counter(
    "price_resolutions_total",
    "Search resolutions by the stage that produced the result",
    ["source"],
)

INGESTED_RECORDS = Counter(
    "ingested_records_total",
    "Records seen by the ingestion batcher, by outcome",
    ["outcome"],
)
