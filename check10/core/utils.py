import logging

logger = logging.getLogger("check10.search")


def log_depth_info(depth, value, nodes, elapsed, best_move, tt_size):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    logger.info(
        "depth %d score %.2f nodes %d nps %d time %dms tt %d best %s",
        depth, value, nodes, nps, int(elapsed * 1000), tt_size, best_move,
    )
