from collections.abc import Sequence

from multicontrib.models import LanguageShare
from multicontrib.models import ProfileStats


TOP_LANGUAGES = 6


def merge_stats(all_stats: Sequence[ProfileStats]) -> ProfileStats:
    """Sum every account's counters; account age is the oldest account's."""

    summed_fields = [name for name in ProfileStats.model_fields if name != "account_years"]
    totals = {name: sum(getattr(stats, name) for stats in all_stats) for name in summed_fields}
    account_years = max((stats.account_years for stats in all_stats), default=0)
    return ProfileStats(**totals, account_years=account_years)


def merge_languages(
    all_languages: Sequence[Sequence[LanguageShare]], limit: int = TOP_LANGUAGES
) -> list[LanguageShare]:
    """Combine language shares by name and keep the largest `limit` by size."""

    by_name: dict[str, LanguageShare] = {}
    for languages in all_languages:
        for language in languages:
            existing = by_name.get(language.name)
            if existing is None:
                by_name[language.name] = language.model_copy()
            else:
                by_name[language.name] = existing.model_copy(
                    update={"size": existing.size + language.size}
                )

    ranked = sorted(by_name.values(), key=lambda language: language.size, reverse=True)
    return ranked[:limit]
