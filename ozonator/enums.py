from enum import Enum

class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"

    ASC = asc
    DESC = desc

class SortValueKind(str, Enum):
    empty = "empty"
    number = "number"
    boolean = "boolean"
    text = "text"

    EMPTY = empty
    NUMBER = number
    BOOLEAN = boolean
    TEXT = text

class DateOnlyBoundary(str, Enum):
    keep = "keep"
    start_of_day = "startOfDay"
    end_of_day = "endOfDay"

    KEEP = keep
    START_OF_DAY = start_of_day
    END_OF_DAY = end_of_day

class DataSet(str, Enum):
    products = "products"
    sales = "sales"
    returns = "returns"
    stocks = "stocks"

    PRODUCTS = products
    SALES = sales
    RETURNS = returns
    STOCKS = stocks

class HiddenBucket(str, Enum):
    main = "main"
    add = "add"

    MAIN = main
    ADD = add
