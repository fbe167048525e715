#!/usr/bin/env python3
import sys
from pathlib import Path
import argparse
from typing import List, Optional

# Setup paths
project_root = Path(__file__).parent.absolute()
sys.path.insert(0, str(project_root))

def build_session(args, loader, logger):
    """Load the grid and settings the command line asks for"""
    from slotting.data_processing.data_transformer import DataTransformer
    from slotting.models.settings import Settings
    from slotting.session.warehouse_session import WarehouseSession

    if args.listing:
        layout, products = loader.load_listing(args.listing)
    else:
        levels, rows, columns = args.demo
        layout = loader.build_empty_layout(levels, rows, columns, args.capacity)
        products = []
        logger.info(f"Created empty {levels}x{rows}x{columns} grid (capacity {layout.cell_capacity:g})")

    settings = loader.load_settings(args.settings, strict=False) if args.settings else Settings()
    overrides = {}
    if args.chain_length is not None:
        overrides['chain_length'] = args.chain_length
    if args.zones:
        overrides.update(distance_zone1=args.zones[0], distance_zone2=args.zones[1],
                         distance_zone3=args.zones[2])
    if args.relocation_mode:
        overrides['relocation_mode'] = args.relocation_mode
    if overrides:
        settings = settings.replace(**overrides)

    if args.populate:
        placed = DataTransformer().populate_initial_warehouse(layout, products)
        logger.info(f"Populated {len(placed)} unplaced products")

    return WarehouseSession(layout, products, settings)

def print_grid_summary(session):
    layout = session.layout
    print("\n" + "=" * 60)
    print("WAREHOUSE SLOTTING")
    print("=" * 60)
    print(f"Grid: {layout.levels} levels x {layout.rows} rows x {layout.columns} columns")
    print(f"Cell capacity: {layout.cell_capacity:g}")
    print(f"Products: {len(session.products)} | Occupied cells: {len(layout.occupied_cells())}"
          f" | Empty cells: {len(layout.empty_cells())}")
    print(f"Settings: {session.settings.to_dict()}")

def print_targets(session, targets):
    from slotting.utils.constants import ZONE_LABELS

    if not targets:
        print("\nNo move targets within zone 3.")
        return
    print(f"\nIdeal cell: {session.state.ideal_cell_id}")
    print("Move targets:")
    for target in targets:
        print(f"  Zone {target.zone} ({ZONE_LABELS[target.zone]:7}) | {target.cell_id:12} | distance {target.distance:.2f}")

def run_add(session, name: str, volume: float):
    result = session.add_product(name, volume)
    if not result.success:
        print(f"\nNo suggestion available: {result.error}")
    elif result.placed:
        print(f"\nPlaced {name} at {result.cell.cell_id} ({result.cell.label()})")
    else:
        print(f"\nNo empty cell; suggested {result.cell.cell_id} for {name}")
    return result

def run_move(session, from_cell: str, to_cell: str):
    targets = session.start_move(from_cell)
    print_targets(session, targets)
    if session.state.source_cell_id is None:
        print(f"\nCell {from_cell} holds no product.")
        return None

    result = session.execute_move(to_cell)
    if result.success:
        mode = "chain shift" if result.chained else "direct move"
        print(f"\nMoved via {mode}: {' -> '.join(result.path)}")
    else:
        print(f"\nCannot relocate: {result.error}")
    return result

def run_validation(session, logger) -> bool:
    from slotting.data_processing.data_validator import DataValidator

    validator = DataValidator()
    products = list(session.products.values())
    valid = True
    for check in (lambda: validator.validate_products(products, session.layout.cell_capacity),
                  lambda: validator.validate_layout(session.layout, products),
                  lambda: validator.validate_settings(session.settings, session.layout)):
        is_valid, issues = check()
        valid = valid and is_valid
        print(validator.generate_validation_report())
        for issue in issues:
            logger.debug(issue)
    return valid

def visualize_and_export_results(session, visualize_path: Optional[str], export_name: Optional[str]):
    """Common function to visualize and export the current state"""
    from slotting.visualization.export_handler import ExportHandler
    from slotting.visualization.warehouse_visualizer import WarehouseVisualizer
    from slotting.utils.logger import get_logger

    logger = get_logger()
    targets = list(session.state.move_targets)

    if visualize_path:
        logger.info("Creating visualization...")
        visualizer = WarehouseVisualizer()
        visualizer.visualize_warehouse(session.layout, session.products,
                                       move_targets=targets,
                                       ideal_cell_id=session.state.ideal_cell_id,
                                       source_cell_id=session.state.source_cell_id,
                                       save_path=visualize_path)

    if export_name:
        exporter = ExportHandler(project_root / 'output')
        json_path = exporter.export_to_json(session.layout, session.products, session.settings,
                                            targets, filename=f"{export_name}.json")
        csv_path = exporter.export_to_csv(session.layout, session.products,
                                          filename=f"{export_name}_cells.csv")
        print(f"\nExported: {json_path}, {csv_path}")

def interactive_mode(session, logger):
    """Run the session as a text menu"""
    from slotting.models.settings import Settings
    from slotting.utils.error_handler import SlottingError

    print_grid_summary(session)

    while True:
        print("\n1. Add product")
        print("2. Show move targets for a cell")
        print("3. Move product")
        print("4. Change settings")
        print("5. Validate")
        print("6. Quit")

        choice = input("\nEnter your choice (1-6): ").strip()
        try:
            if choice == "1":
                name = input("Product name: ").strip()
                volume = float(input("Volume: ").strip())
                run_add(session, name, volume)
            elif choice == "2":
                cell_id = input("Cell (column-row-Llevel): ").strip()
                print_targets(session, session.start_move(cell_id))
                session.cancel_move()
            elif choice == "3":
                from_cell = input("From cell: ").strip()
                to_cell = input("To cell: ").strip()
                run_move(session, from_cell, to_cell)
            elif choice == "4":
                chain_length = int(input(f"Chain length [{session.settings.chain_length}]: ")
                                   or session.settings.chain_length)
                zones = input(f"Zone thresholds [{' '.join(f'{z:g}' for z in session.settings.zone_thresholds)}]: ").split()
                data = session.settings.to_dict()
                data['chain_length'] = chain_length
                if len(zones) == 3:
                    data.update(distance_zone1=zones[0], distance_zone2=zones[1], distance_zone3=zones[2])
                session.update_settings(Settings.from_dict(data))
            elif choice == "5":
                run_validation(session, logger)
            elif choice == "6":
                return
            else:
                print("Invalid choice.")
        except (SlottingError, ValueError) as e:
            logger.error(f"Error in interactive mode: {e}")
            print(f"\nError: {e}")

def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Warehouse Slotting System',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --listing data/listing.json --interactive
  python main.py --demo 3 8 12 --capacity 100 --add "Pallet A" 95
  python main.py --listing data/listing.json --move 1-1-L1 5-1-L1 --chain-length 3
  python main.py --listing data/listing.json --targets 4-2-L1 --zones 2 4 6 --visualize map.png
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--listing', help='Warehouse listing JSON file')
    source.add_argument('--demo', nargs=3, type=int, metavar=('LEVELS', 'ROWS', 'COLUMNS'),
                        default=[3, 8, 12], help='Start from an empty grid')
    parser.add_argument('--capacity', type=float, default=None,
                        help='Cell capacity (volume units)')
    parser.add_argument('--settings', help='Settings JSON file')
    parser.add_argument('--chain-length', type=int, help='1 = direct moves, >1 = chain shifts')
    parser.add_argument('--zones', nargs=3, type=float, metavar=('Z1', 'Z2', 'Z3'),
                        help='Zone distance thresholds')
    parser.add_argument('--relocation-mode', choices=['full_grid', 'same_row'],
                        help='Where relocation searches for the ideal cell')
    parser.add_argument('--populate', action='store_true',
                        help='Fill empty cells with unplaced products by popularity')
    parser.add_argument('--add', nargs=2, metavar=('NAME', 'VOLUME'),
                        help='Add a product and place it')
    parser.add_argument('--targets', metavar='CELL', help='Show move targets for a cell')
    parser.add_argument('--move', nargs=2, metavar=('FROM', 'TO'), help='Relocate a product')
    parser.add_argument('--validate', '-v', action='store_true', help='Run data validation')
    parser.add_argument('--visualize', metavar='PATH', help='Save a warehouse map image')
    parser.add_argument('--export', metavar='NAME', help='Export snapshot to output/')
    parser.add_argument('--interactive', '-i', action='store_true', help='Run in interactive mode')

    args = parser.parse_args(argv)

    from slotting.data_processing.data_loader import DataLoader
    from slotting.utils.constants import DEFAULT_CELL_CAPACITY
    from slotting.utils.error_handler import SlottingError
    from slotting.utils.logger import get_logger

    logger = get_logger()
    loader = DataLoader(project_root / 'data', cell_capacity=args.capacity or DEFAULT_CELL_CAPACITY)

    try:
        session = build_session(args, loader, logger)

        if args.interactive:
            interactive_mode(session, logger)
            return 0

        print_grid_summary(session)

        if args.validate and not run_validation(session, logger):
            return 1
        if args.add:
            run_add(session, args.add[0], float(args.add[1]))
        if args.targets:
            print_targets(session, session.start_move(args.targets))
        if args.move:
            session.cancel_move()
            run_move(session, args.move[0], args.move[1])

        visualize_and_export_results(session, args.visualize, args.export)
        return 0

    except (SlottingError, ValueError) as e:
        logger.error(f"Error: {e}", exc_info=True)
        print(f"\nError: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
