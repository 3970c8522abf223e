import argparse
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from media_recommendations import __version__
from media_recommendations.errors import LoadError, RecommendationError
from media_recommendations.models.recommender import Configuration
from media_recommendations.services.recommender import Recommender
from media_recommendations.utils.logger import Logger
from media_recommendations.utils.params import load_parameters

PROG = "get-media-recommendations"

DESCRIPTION = """\
Request recommendations from a Google Cloud Discovery Engine model for every
user event contained within the parameter input file.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, description=DESCRIPTION)
    parser.add_argument("-p", "--project", default=os.environ.get("DISCOVERY_PROJECT", ""),
                        help="Project number (required)")
    parser.add_argument("-l", "--location", default=os.environ.get("DISCOVERY_LOCATION", "global"),
                        help="Location")
    parser.add_argument("-d", "--data-store", default=os.environ.get("DISCOVERY_DATA_STORE", "default_data_store"),
                        help="Data store")
    parser.add_argument("-b", "--branch", default=os.environ.get("DISCOVERY_BRANCH", "0"),
                        help="Branch")
    parser.add_argument("-s", "--serving-config", default=os.environ.get("DISCOVERY_SERVING_CONFIG", ""),
                        help="Serving config (required)")
    parser.add_argument("-i", "--input-file", default="",
                        help="Parameter input file: a JSON array of user events (required)")
    parser.add_argument("-n", "--num-results", type=int, default=os.environ.get("DISCOVERY_NUM_RESULTS", "5"),
                        help="Number of results, 1 to 100")
    parser.add_argument("-f", "--filter", default=os.environ.get("DISCOVERY_FILTER", ""),
                        help="Filter string")
    parser.add_argument("-t", "--lookup-titles", action="store_true",
                        help="Fetch the document for results that come back without a title")
    parser.add_argument("-v", "--verbose", action="store_true", help="Output verbose detail")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None, *, recommender_factory=Recommender) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input_file:
        parser.print_usage(sys.stderr)
        print(f"{PROG}: error: the parameter input file (-i) is required", file=sys.stderr)
        return 1

    try:
        config = Configuration(
            project=args.project,
            location=args.location,
            data_store=args.data_store,
            branch=args.branch,
            serving_config=args.serving_config,
            page_size=args.num_results,
            filter=args.filter,
        )
    except ValidationError as exc:
        parser.print_usage(sys.stderr)
        print(f"{PROG}: error: invalid arguments\n{exc}", file=sys.stderr)
        return 1

    logger = Logger(PROG, level="DEBUG" if args.verbose else os.getenv("LOG_LEVEL", "INFO"))

    logger.info(f"{PROG} {__version__}")
    logger.info("Arguments")
    logger.info("...", **{"Project Number": config.project})
    logger.info("...", **{"Location": config.location})
    logger.info("...", **{"Data Store": config.data_store})
    logger.info("...", **{"Branch": config.branch})
    logger.info("...", **{"Serving Config": config.serving_config})
    logger.info("...", **{"Parameter Input File": args.input_file})
    logger.info("...", **{"Number of Results": config.page_size})
    logger.info("...", **{"Filter String": config.filter})
    logger.info("Begin")

    logger.info("Loading Parameter Input File")
    try:
        events = load_parameters(args.input_file)
    except LoadError as exc:
        logger.error("Load Parameter Input File Failed", stage=exc.stage, error=str(exc))
        return 1

    try:
        with recommender_factory(config, logger=logger, lookup_titles=args.lookup_titles) as recommender:
            recommender.execute_requests(events)
    except RecommendationError as exc:
        logger.error("Recommendation Request Failed", stage=exc.stage, error=str(exc))
        return 1

    logger.info("End")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
