"""
物流比价 CLI

所有命令输出结构化 JSON，日志输出到 stderr。

用法:
    python -m pricecompare.cli quote --province 浙江 --city 杭州 --weight 2.5
    python -m pricecompare.cli quote --province 浙江 --city 杭州 --weight 2.5 --all
    python -m pricecompare.cli match --text "广东省清远市"
    python -m pricecompare.cli rules --text "广东省清远市" --weight 12
    python -m pricecompare.cli parse --text "张三 13800138000 广东省清远市清城区xx路"
    python -m pricecompare.cli profit --action n-point --cost 100 --rate 20
    python -m pricecompare.cli profit --action profit-point --cost 80 --price 100
    python -m pricecompare.cli profit --action history
    python -m pricecompare.cli stats
"""

import argparse
import json
import sys
from typing import Any


def _json_out(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def _build_service():
    from pricecompare.modules.quote.service import PriceCompareService

    return PriceCompareService()


def cmd_quote(args: argparse.Namespace) -> None:
    service = _build_service()

    if args.all:
        quotes = service.quote_all(args.province, args.city, args.weight)
        _json_out(
            {
                "province": args.province,
                "city": args.city,
                "weight": args.weight,
                "total": len(quotes),
                "quotes": [item.to_dict() for item in quotes],
            }
        )
        return

    results = service.calculate_prices(args.province, args.city, args.weight)
    _json_out(
        {
            "province": args.province,
            "city": args.city,
            "weight": args.weight,
            "total": len(results),
            "results": [item.to_dict() for item in results],
        }
    )


def cmd_match(args: argparse.Namespace) -> None:
    service = _build_service()
    match = service.match_address(args.text)
    best = service.match_location(args.text)
    _json_out(
        {
            "text": args.text,
            "match": match.to_dict(),
            "best_location": best.to_dict() if best else None,
        }
    )


def cmd_rules(args: argparse.Namespace) -> None:
    service = _build_service()
    match, results = service.quote_address(args.text, args.weight)
    if not match.candidate_locations:
        _json_out({"error": f"No location matched: {args.text}", "results": []})
        return
    _json_out(
        {
            "text": args.text,
            "weight": args.weight,
            "match": match.to_dict(),
            "total": len(results),
            "results": [item.to_dict() for item in results],
        }
    )


def cmd_parse(args: argparse.Namespace) -> None:
    from pricecompare.modules.quote.address_parser import format_address, parse_address, validate_address

    parsed = parse_address(args.text)
    _json_out(
        {
            "parsed": parsed.to_dict(),
            "valid": validate_address(parsed),
            "formatted": format_address(parsed),
        }
    )


def _build_history():
    from pricecompare.core.config import get_config
    from pricecompare.modules.profit.history import CalculationHistory, JsonFileHistoryStorage

    profit_cfg = get_config().get_section("profit", {})
    storage = JsonFileHistoryStorage(profit_cfg.get("history_path", "data/profit_history.json"))
    return CalculationHistory(storage, max_records=int(profit_cfg.get("max_records", 5)))


def cmd_profit(args: argparse.Namespace) -> None:
    from pricecompare.modules.profit.calculator import calculate_n_point_price, calculate_profit_point
    from pricecompare.modules.profit.history import (
        N_POINT,
        PROFIT_POINT,
        CalculationRecord,
        copy_to_clipboard,
    )

    action = args.action
    history = _build_history()

    if action == "history":
        records = history.get()
        _json_out({"total": len(records), "records": [item.to_dict() for item in records]})
        return

    if action == "clear":
        history.clear()
        _json_out({"success": True})
        return

    if action == "n-point":
        if args.cost is None or args.rate is None:
            _json_out({"error": "Specify --cost and --rate"})
            return
        outputs = calculate_n_point_price(args.cost, args.rate)
        if outputs is None:
            _json_out({"error": "Invalid input: cost must be > 0 and 0 <= rate < 100"})
            return
        record = CalculationRecord.create(
            N_POINT,
            inputs={"cost": args.cost, "profitRate": args.rate},
            outputs=outputs.to_dict(),
        )
        copy_text = f"{outputs.price:.2f}"
    elif action == "profit-point":
        if args.cost is None or args.price is None:
            _json_out({"error": "Specify --cost and --price"})
            return
        outputs = calculate_profit_point(args.cost, args.price)
        if outputs is None:
            _json_out({"error": "Invalid input: cost and price must be > 0"})
            return
        record = CalculationRecord.create(
            PROFIT_POINT,
            inputs={"cost": args.cost, "price": args.price},
            outputs=outputs.to_dict(),
        )
        copy_text = f"{outputs.profit_rate:.2f}"
    else:
        _json_out({"error": f"Unknown profit action: {action}"})
        return

    saved = history.save(record)
    result: dict[str, Any] = {"record": record.to_dict(), "saved": saved}
    if args.copy:
        result["copied"] = copy_to_clipboard(copy_text)
    _json_out(result)


def cmd_stats(args: argparse.Namespace) -> None:
    _json_out(_build_service().stats())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pricecompare",
        description="物流比价计算器 CLI",
    )
    sub = parser.add_subparsers(dest="command", help="可用命令")

    # quote
    p = sub.add_parser("quote", help="按省市和重量比价")
    p.add_argument("--province", required=True, help="省份")
    p.add_argument("--city", default="", help="城市")
    p.add_argument("--weight", type=float, required=True, help="重量（kg）")
    p.add_argument("--all", action="store_true", help="输出全部物流公司（含无报价）")

    # match
    p = sub.add_parser("match", help="地址匹配到标准地点")
    p.add_argument("--text", required=True, help="地址文本")

    # rules
    p = sub.add_parser("rules", help="按规则库计价")
    p.add_argument("--text", required=True, help="地址文本")
    p.add_argument("--weight", type=float, required=True, help="重量（kg）")

    # parse
    p = sub.add_parser("parse", help="解析收件信息")
    p.add_argument("--text", required=True, help="收件信息文本")

    # profit
    p = sub.add_parser("profit", help="利润点计算")
    p.add_argument("--action", required=True, choices=["n-point", "profit-point", "history", "clear"])
    p.add_argument("--cost", type=float, default=None, help="成本")
    p.add_argument("--rate", type=float, default=None, help="利润率（%）")
    p.add_argument("--price", type=float, default=None, help="售价")
    p.add_argument("--copy", action="store_true", help="复制结果到剪贴板")

    # stats
    sub.add_parser("stats", help="数据加载概况")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    dispatch = {
        "quote": cmd_quote,
        "match": cmd_match,
        "rules": cmd_rules,
        "parse": cmd_parse,
        "profit": cmd_profit,
        "stats": cmd_stats,
    }

    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        handler(args)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        _json_out({"error": str(e)})
        sys.exit(1)


if __name__ == "__main__":
    main()
