"""ABI fragments of the games registry contract."""

PLAYER_DATA_UPDATED = "PlayerDataUpdated"

GAME_CONTRACT_ABI = [
    {
        "type": "event",
        "name": PLAYER_DATA_UPDATED,
        "anonymous": False,
        "inputs": [
            {"name": "game", "type": "address", "indexed": True},
            {"name": "player", "type": "address", "indexed": True},
            {"name": "scoreAmount", "type": "uint256", "indexed": True},
            {"name": "transactionAmount", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "function",
        "name": "totalScoreOfPlayer",
        "stateMutability": "view",
        "inputs": [{"name": "player", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "totalTransactionsOfPlayer",
        "stateMutability": "view",
        "inputs": [{"name": "player", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "playerDataPerGame",
        "stateMutability": "view",
        "inputs": [
            {"name": "game", "type": "address"},
            {"name": "player", "type": "address"},
        ],
        "outputs": [
            {"name": "score", "type": "uint256"},
            {"name": "transactions", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "updatePlayerData",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "player", "type": "address"},
            {"name": "scoreAmount", "type": "uint256"},
            {"name": "transactionAmount", "type": "uint256"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "GAME_ROLE",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "type": "function",
        "name": "hasRole",
        "stateMutability": "view",
        "inputs": [
            {"name": "role", "type": "bytes32"},
            {"name": "account", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "registerGame",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "_game", "type": "address"},
            {"name": "_name", "type": "string"},
            {"name": "_image", "type": "string"},
            {"name": "_url", "type": "string"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "games",
        "stateMutability": "view",
        "inputs": [{"name": "", "type": "address"}],
        "outputs": [
            {"name": "game", "type": "address"},
            {"name": "image", "type": "string"},
            {"name": "name", "type": "string"},
            {"name": "url", "type": "string"},
        ],
    },
]
