import re
from typing import List, Optional

# Web3-related skill keywords (lowercase), reported in this order
WEB3_SKILLS = [
    "solidity",
    "ethereum",
    "blockchain",
    "web3",
    "smart contract",
    "defi",
    "nft",
    "dapp",
    "ipfs",
    "dao",
    "token",
    "cryptocurrency",
    "polygon",
    "hardhat",
    "truffle",
    "foundry",
    "vyper",
    "chainlink",
    "cosmos",
    "polkadot",
    "substrate",
]

# Keywords this short must be whole tokens ("dao" is not in "ecuador")
SHORT_KEYWORD_LEN = 4

_SHORT_PATTERNS = {
    skill: re.compile(rf"(?:^|[^a-z]){re.escape(skill)}(?:[^a-z]|$)")
    for skill in WEB3_SKILLS
    if len(skill) <= SHORT_KEYWORD_LEN
}


def detect_web3_skills(
    bio: Optional[str],
    company: Optional[str] = None,
    blog: Optional[str] = None,
) -> List[str]:
    """Return the Web3 keywords mentioned in a profile's bio, company or blog."""
    text = " ".join(part for part in (bio, company, blog) if part).lower()
    if not text:
        return []

    found = []
    for skill in WEB3_SKILLS:
        pattern = _SHORT_PATTERNS.get(skill)
        if pattern is not None:
            if pattern.search(text):
                found.append(skill)
        elif skill in text:
            found.append(skill)
    return found
