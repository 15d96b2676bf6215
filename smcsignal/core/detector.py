# core/detector.py
"""
Structure detector: runs every SMC sub-detector over one validated candle set
and assembles the StructureBundle.
"""
import logging

from smcsignal.config import AnalysisConfig
from smcsignal.context.imbalance import annotate_fills, detect_imbalances
from smcsignal.context.liquidity import detect_liquidity_zones
from smcsignal.context.zones import annotate_mitigation, detect_order_blocks
from smcsignal.core.breaks import detect_bos, detect_choch
from smcsignal.core.structure import determine_market_bias, infer_market_structure
from smcsignal.core.swings import detect_swings
from smcsignal.metrics.candles import CandleArrays
from smcsignal.models import StructureBundle, StructureSummary, ZoneGroup

logger = logging.getLogger(__name__)

MAX_ACTIVE_FILL = 60.0


def empty_structure() -> StructureBundle:
    """Structure bundle with no swings, events or zones and a NEUTRAL bias."""
    return StructureBundle()


def _order_block_group(blocks) -> ZoneGroup:
    return ZoneGroup(
        all=blocks,
        active=tuple(b for b in blocks if not b.mitigated),
        bullish=tuple(b for b in blocks if b.is_bullish),
        bearish=tuple(b for b in blocks if not b.is_bullish),
    )


def _imbalance_group(zones) -> ZoneGroup:
    return ZoneGroup(
        all=zones,
        active=tuple(z for z in zones if not z.filled and z.fill_percent < MAX_ACTIVE_FILL),
        bullish=tuple(z for z in zones if z.is_bullish),
        bearish=tuple(z for z in zones if not z.is_bullish),
    )


def detect_structure(
        candles: CandleArrays,
        config: AnalysisConfig = AnalysisConfig()
) -> StructureBundle:
    """
    Full smart-money structure for one candle sequence.

    Parameters
    ----------
    candles : CandleArrays
        Output of `to_candle_arrays` (already validated).
    config : AnalysisConfig
        Uses ``swing_lookback``, ``bos_lookback``, ``ob_lookback``,
        ``fvg_significance`` and ``liquidity_tolerance``.

    Returns
    -------
    StructureBundle
        Event lists most recent first; zones annotated for mitigation/fill.

    Notes
    -----
    - Sparse or pattern-free input yields empty collections, never an error.
    - Active order blocks: not mitigated. Active FVGs: not filled and
      less than 60% filled.
    """
    swings = detect_swings(candles, config.swing_lookback)
    bos = detect_bos(candles, swings)
    choch = detect_choch(candles, swings)

    # === ZONES (DETECT, THEN ANNOTATE) ===
    blocks = annotate_mitigation(
        candles, detect_order_blocks(candles, bos, config.ob_lookback)
    )
    imbalances = annotate_fills(
        candles, detect_imbalances(candles, config.fvg_significance)
    )
    liquidity = detect_liquidity_zones(candles, swings, config.liquidity_tolerance)

    # === STRUCTURE & BIAS ===
    structure = infer_market_structure(swings)
    bias = determine_market_bias(structure, bos, choch, len(candles), config.bos_lookback)

    order_blocks = _order_block_group(blocks)
    fvgs = _imbalance_group(imbalances)

    summary = StructureSummary(
        total_bos=len(bos),
        total_choch=len(choch),
        active_order_blocks=len(order_blocks.active),
        active_fvgs=len(fvgs.active),
        liquidity_zones=len(liquidity.all),
        total_candles=len(candles),
    )
    logger.debug(
        "structure: %d swings, %d BOS, %d CHoCH, %d/%d active OB, %d/%d active FVG, bias=%s",
        len(swings.all), summary.total_bos, summary.total_choch,
        summary.active_order_blocks, len(blocks), summary.active_fvgs, len(imbalances),
        bias.value,
    )

    return StructureBundle(
        swings=swings,
        bos=bos,
        choch=choch,
        order_blocks=order_blocks,
        fvgs=fvgs,
        liquidity=liquidity,
        structure=structure,
        market_bias=bias,
        summary=summary,
    )
