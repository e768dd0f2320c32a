"""Toggle expansion for Notion pages.

Notion hides the body of toggle blocks (and toggle headings) until they are
clicked.  :func:`expand_toggles` repeatedly clicks every visible, enabled
collapsed toggle until nothing is left to click, the page stops making
progress, or the iteration cap is reached.  Opening a toggle can reveal nested
toggles, which is why a single pass is not enough.
"""

import logging
from typing import Optional, Tuple

from playwright.async_api import Page

from app.config import Settings

logger = logging.getLogger(__name__)

# Runs inside the page.  Returns plain data only: how many toggles matched the
# selector and how many of them were actually clicked.
_CLICK_COLLAPSED_JS = """
({ selector, firstOnly }) => {
  const nodes = Array.from(document.querySelectorAll(selector));
  let clicked = 0;
  for (const node of nodes) {
    if (!node || !node.isConnected) continue;
    const rect = node.getBoundingClientRect();
    const visible = rect.width > 1 && rect.height > 1 && rect.bottom > 0 && rect.right > 0;
    if (!visible) continue;
    if (node.getAttribute('aria-disabled') === 'true') continue;
    node.scrollIntoView({ block: 'center', inline: 'center', behavior: 'auto' });
    node.dispatchEvent(new MouseEvent('click', { bubbles: true, cancelable: true }));
    clicked += 1;
    if (firstOnly) break;
  }
  return { matched: nodes.length, clicked };
}
"""


async def expand_toggles(page: Page, settings: Settings) -> int:
    """Click collapsed toggles on *page* until expansion converges.

    Expansion is best-effort: any browser error is logged and the content
    expanded so far is kept.

    Returns:
        The total number of toggle activations performed.
    """
    total_clicked = 0
    previous: Optional[Tuple[int, int]] = None
    arg = {
        "selector": settings.toggle_selector,
        "firstOnly": settings.toggle_strategy == "first",
    }

    try:
        for iteration in range(settings.toggle_max_iterations):
            outcome = await page.evaluate(_CLICK_COLLAPSED_JS, arg)
            matched, clicked = int(outcome["matched"]), int(outcome["clicked"])
            total_clicked += clicked

            if matched == 0 or clicked == 0:
                break
            # Same counts as last time: the previous clicks opened nothing new.
            # With the "first" strategy a click that opens one toggle and reveals
            # exactly one nested toggle also repeats the counts and ends the loop
            # early; the batch strategy avoids this.
            if previous == (matched, clicked):
                logger.debug("Toggle expansion plateaued after %d iterations", iteration + 1)
                break
            previous = (matched, clicked)

            await page.wait_for_timeout(settings.toggle_delay_ms)
    except Exception as exc:
        logger.warning("Could not expand collapsed content: %s", exc)

    logger.info("Expanded %d toggle(s)", total_clicked)
    return total_clicked
