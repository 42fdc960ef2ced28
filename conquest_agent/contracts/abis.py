"""ABI fragments for the game contract facets the agent calls.

All facets live behind the same game contract address.
"""


def _fn(name, inputs, outputs=(), mutability="nonpayable"):
    return {
        "type": "function",
        "name": name,
        "inputs": list(inputs),
        "outputs": list(outputs),
        "stateMutability": mutability,
    }


def _arg(name, type_, components=None):
    arg = {"name": name, "type": type_}
    if components is not None:
        arg["internalType"] = "struct"
        arg["components"] = list(components)
    return arg


CONFIG_COMPONENTS = [
    _arg("stakingToken", "address"),
    _arg("freePlanetStakingToken", "address"),
    _arg("allianceRegistry", "address"),
    _arg("genesis", "uint256"),
    _arg("resolveWindow", "uint256"),
    _arg("timePerDistance", "uint256"),
    _arg("exitDuration", "uint256"),
    _arg("acquireNumSpaceships", "uint32"),
    _arg("productionSpeedUp", "uint32"),
    _arg("frontrunningDelay", "uint256"),
    _arg("productionCapAsDuration", "uint256"),
    _arg("upkeepProductionDecreaseRatePer10000th", "uint256"),
    _arg("fleetSizeFactor6", "uint256"),
    _arg("initialSpaceExpansion", "uint32"),
    _arg("expansionDelta", "uint32"),
    _arg("giftTaxPer10000", "uint256"),
    _arg("stakeRange", "bytes32"),
    _arg("stakeMultiplier10000th", "uint256"),
    _arg("bootstrapSessionEndTime", "uint256"),
    _arg("infinityStartTime", "uint256"),
]

EXTERNAL_PLANET_COMPONENTS = [
    _arg("owner", "address"),
    _arg("ownershipStartTime", "uint40"),
    _arg("exitStartTime", "uint40"),
    _arg("numSpaceships", "uint32"),
    _arg("overflow", "uint32"),
    _arg("lastUpdated", "uint40"),
    _arg("active", "bool"),
    _arg("reward", "uint256"),
]

INFORMATION_ABI = [
    _fn("getConfig", [], [_arg("config", "tuple", CONFIG_COMPONENTS)], "view"),
    _fn(
        "getPlanetStates",
        [_arg("locations", "uint256[]")],
        [_arg("states", "tuple[]", EXTERNAL_PLANET_COMPONENTS)],
        "view",
    ),
]

FLEETS_COMMIT_ABI = [
    _fn(
        "send",
        [_arg("from", "uint256"), _arg("quantity", "uint32"), _arg("toHash", "bytes32")],
        [_arg("fleetId", "uint256")],
    ),
    _fn(
        "sendFor",
        [
            _arg(
                "fleet",
                "tuple",
                [
                    _arg("fleetSender", "address"),
                    _arg("fleetOwner", "address"),
                    _arg("from", "uint256"),
                    _arg("quantity", "uint32"),
                    _arg("toHash", "bytes32"),
                ],
            )
        ],
        [_arg("fleetId", "uint256")],
    ),
]

FLEET_RESOLUTION_COMPONENTS = [
    _arg("from", "uint256"),
    _arg("to", "uint256"),
    _arg("distance", "uint256"),
    _arg("arrivalTimeWanted", "uint256"),
    _arg("gift", "bool"),
    _arg("specific", "address"),
    _arg("secret", "bytes32"),
    _arg("fleetSender", "address"),
    _arg("operator", "address"),
]

FLEETS_REVEAL_ABI = [
    _fn(
        "resolveFleet",
        [
            _arg("fleetId", "uint256"),
            _arg("resolution", "tuple", FLEET_RESOLUTION_COMPONENTS),
        ],
    ),
]

STAKING_ABI = [
    _fn(
        "exitMultipleFor",
        [_arg("owner", "address"), _arg("locations", "uint256[]")],
    ),
    _fn(
        "acquireMultipleViaNativeTokenAndStakingToken",
        [
            _arg("locations", "uint256[]"),
            _arg("amountToMint", "uint256"),
            _arg("tokenAmount", "uint256"),
        ],
        mutability="payable",
    ),
]
