"""Default GachiScript vocabulary.

Each table maps a host-language (JavaScript / TypeScript) lexical atom to
its GachiScript form. Tables are grouped by category; the framework tables
are only merged into a session's mapping table when that framework is
selected.

Substituted forms must stay unique across every table that can be active
at the same time, otherwise the reverse index has to drop one of the pairs.

Reverse mode rewrites every word-bounded occurrence of a form, so forms are
compound words that ordinary programs do not use as names (`muscleLoop`,
not `loop`). Operator forms only ever appear inside strict-mode
annotations and are never rewritten back from plain text.
"""

KEYWORDS: dict[str, str] = {
    # Variable declarations
    "const": "firmConst",
    "let": "tightVar",
    "var": "looseVar",
    # Types and classes
    "interface": "bulkInterface",
    "type": "tightType",
    "enum": "menuOfMen",
    "class": "hotClass",
    "extends": "extendDaddy",
    "implements": "signsContract",
    "abstract": "deepFantasy",
    # Functions
    "function": "initWorkout",
    "async": "asyncPump",
    "await": "awaitGrip",
    "return": "sweatReturn",
    "yield": "yieldMoan",
    # Control flow
    "if": "dominateIf",
    "else": "flexElse",
    "switch": "switchPosition",
    "case": "caseStance",
    "default": "defaultMoan",
    "for": "muscleLoop",
    "while": "deepLoop",
    "do": "doReps",
    "break": "breakRelease",
    "continue": "keepPumping",
    # Objects and operators spelled as words
    "new": "freshMeat",
    "delete": "dumpLoad",
    "typeof": "whatKindOfGuy",
    "instanceof": "isOneOfUs",
    "in": "insideGym",
    "of": "outOfGym",
    "this": "thisBoy",
    "super": "superDaddy",
    "static": "staticFlex",
    "private": "privateSession",
    "protected": "guardedDungeon",
    "public": "publicShow",
    "readonly": "lookNoTouch",
    # Exceptions
    "try": "tryDominance",
    "catch": "catchRelease",
    "finally": "finallyRest",
    "throw": "throwDown",
    # Modules
    "import": "importLube",
    "export": "exportLoad",
    "from": "fromDungeon",
    "as": "strongCast",
    # Literal keywords
    "true": "trueMan",
    "false": "falseAlarm",
    "null": "emptyLocker",
    "undefined": "lostInDungeon",
}

OPERATORS: dict[str, str] = {
    # Assignment and comparison
    "=": "becomes",
    "==": "matches",
    "===": "deeplyMatches",
    "!=": "differs",
    "!==": "deeplyDiffers",
    # Arithmetic
    "+": "plus",
    "-": "minus",
    "*": "multiply",
    "/": "divide",
    "%": "remainder",
    "**": "power",
    "++": "increment",
    "--": "decrement",
    "+=": "addTo",
    "-=": "subtractFrom",
    "*=": "multiplyBy",
    "/=": "divideBy",
    "%=": "remainderBy",
    # Logic and bits
    "&&": "and",
    "||": "or",
    "!": "not",
    "&": "bitwiseAnd",
    "|": "bitwiseOr",
    "^": "bitwiseXor",
    "~": "bitwiseNot",
    "<<": "leftShift",
    ">>": "rightShift",
    ">>>": "unsignedRightShift",
    "<": "smaller",
    ">": "bigger",
    "<=": "smallerOrEqual",
    ">=": "biggerOrEqual",
    "?": "maybe",
    ":": "otherwise",
    # Brackets and delimiters
    "{": "openGym",
    "}": "closeGym",
    "(": "grab",
    ")": "letGo",
    "[": "enter",
    "]": "exit",
    ";": "rest",
    ",": "next",
    ".": "into",
    "...": "spread",
    "=>": "leadsTo",
}

TYPES: dict[str, str] = {
    "string": "stringRope",
    "number": "muscleCount",
    "boolean": "yesOrNoBoy",
    "object": "objectOfDesire",
    "array": "arrayOfMen",
    "void": "voidDungeon",
    "any": "anyoneGoes",
    "unknown": "unknownStranger",
    "never": "neverFinish",
}

BUILTIN_METHODS: dict[str, str] = {
    # Arrays
    "push": "pushDeep",
    "pop": "popOut",
    "shift": "shiftPosition",
    "unshift": "slideInFront",
    "splice": "spliceBodies",
    "slice": "sliceMeat",
    "concat": "concatBuddies",
    "map": "mapMuscles",
    "filter": "filterWeaklings",
    "reduce": "reduceLoad",
    "forEach": "forEachBoy",
    "find": "findPartner",
    "findIndex": "findPartnerIndex",
    "includes": "includesBoy",
    "indexOf": "indexOfBoy",
    "join": "joinTheClub",
    "split": "splitReps",
    "reverse": "reverseCard",
    "sort": "sortByMuscle",
    # Promises
    "then": "thenClimax",
    "catch": "catchLoad",
    "finally": "finallySpent",
    "resolve": "resolveTension",
    "reject": "rejectBoy",
    # DOM
    "addEventListener": "listenForMoan",
    "removeEventListener": "stopListeningMoan",
    "querySelector": "seekOneBoy",
    "querySelectorAll": "seekAllBoys",
    "getElementById": "findBoyById",
    "createElement": "buildBody",
    "appendChild": "attachBoy",
    "removeChild": "detachBoy",
    "setAttribute": "setBodyTrait",
    "getAttribute": "getBodyTrait",
    "removeAttribute": "dropBodyTrait",
}

BUILTIN_OBJECTS: dict[str, str] = {
    "Promise": "PromiseGrip",
    "NaN": "confusedBoy",
    "Infinity": "endlessStamina",
}

FRAMEWORK_IDENTIFIERS: dict[str, dict[str, str]] = {
    "react": {
        "React": "GachiReact",
        "Component": "GachiComponent",
        "useState": "useGachiState",
        "useEffect": "gachiHook",
        "useContext": "useDungeonContext",
        "useReducer": "useCompressorPump",
        "useMemo": "rememberThatNight",
        "useCallback": "rememberTheMove",
        "useRef": "useHardRef",
        "props": "giftsFromDaddy",
        "state": "gymCondition",
        "render": "performShowOff",
        "componentDidMount": "afterMountFlex",
        "componentWillUnmount": "beforeUnmountFlex",
    },
    "angular": {
        "@Component": "@CoreDecor",
        "@Injectable": "@InjectLust",
        "@Input": "@GachiProp",
        "@Output": "@GachiOutput",
        "@ViewChild": "@SeeChildBoy",
        "@HostListener": "@ListenHostBoy",
        "ngOnInit": "gachiWarmUp",
        "ngOnDestroy": "gachiCoolDown",
        "ngOnChanges": "gachiSwitchUp",
        "ngAfterViewInit": "gachiAfterShow",
    },
    "vue": {
        "Vue": "GachiView",
        "data": "gachiData",
        "computed": "computedGains",
        "methods": "gachiMethods",
        "watch": "watchTheShow",
        "mounted": "mountedUp",
        "destroyed": "destroyedAfter",
        "created": "createdInGym",
    },
}

PHRASES: dict[str, str] = {
    "algorithm": "routineOfReps",
    "variable": "holderBoy",
    "parameter": "intakeBoy",
    "argument": "offeringBoy",
    "callback": "callMeBackBoy",
    "promise": "commitmentBoy",
    "iterator": "walkerBoy",
    "generator": "producerBoy",
    "closure": "captureBoy",
    "scope": "reachOfGym",
    "hoisting": "liftingWeights",
    "prototype": "thickProto",
    "inheritance": "daddyLegacy",
    "polymorphism": "shapeShifterBoy",
    "encapsulation": "wrappedTight",
    "abstraction": "simplifiedBoy",
    "error": "deepPain",
}

# Decorative quotes attached as comments; never part of the mapping.
BILLY_QUOTES: tuple[str, ...] = (
    "Boss of this gym",
    "Welcome to the club, buddy",
    "Take it boy",
    "Come on college boy",
    "That's amazing",
)

VAN_QUOTES: tuple[str, ...] = (
    "Deep dark fantasies",
    "Boy next door",
    "Fisting is 300 bucks",
    "Sorry for what?",
    "Dungeon master approves",
)
