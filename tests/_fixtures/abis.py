"""ABI documents shared by the test suite."""

ERC20_ABI = [
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "supply", "type": "uint256"}],
    },
]

# Same shape as many hand-written ABIs: underscore-prefixed parameter names
UNDERSCORE_ABI_TEXT = """[
  {
    "type": "function",
    "name": "transferFrom",
    "inputs": [
      {"name": "_from", "type": "address"},
      {"name": "_to", "type": "address"},
      {"name": "_value", "type": "uint256"}
    ],
    "outputs": [{"name": "success", "type": "bool"}]
  },
  {
    "type": "event",
    "name": "Approval",
    "inputs": [
      {"name": "_owner", "type": "address", "indexed": true},
      {"name": "_spender", "type": "address", "indexed": true},
      {"name": "_value", "type": "uint256", "indexed": false}
    ]
  }
]
"""
