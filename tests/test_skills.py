"""
Tests for Web3 skill detection.
"""

from gitfast.skills import detect_web3_skills


class TestDetectWeb3Skills:

    def test_empty(self):
        assert detect_web3_skills(None, None, None) == []
        assert detect_web3_skills("") == []

    def test_matches_across_fields_in_list_order(self):
        skills = detect_web3_skills("Building DeFi on Ethereum", "Chainlink Labs", "https://nft.example.com")
        assert skills == ["ethereum", "defi", "nft", "chainlink"]

    def test_short_keywords_need_token_boundaries(self):
        """'dao' inside 'Ecuador' and 'nft' inside a word do not count."""
        assert detect_web3_skills("Quito, Ecuador", "Infterra") == []
        assert detect_web3_skills("DAO contributor") == ["dao"]

    def test_long_keywords_match_substrings(self):
        assert detect_web3_skills("smart contracts auditor, tokenizer fan") == ["smart contract", "token"]

    def test_case_insensitive(self):
        assert detect_web3_skills("SOLIDITY + Hardhat") == ["solidity", "hardhat"]
