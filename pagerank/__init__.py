from pagerank.pagerank import (
    DEFAULT_DAMPING_FACTOR,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    InvalidInput,
    PageRankResult,
    compute_pagerank,
    run_pagerank,
)
